from fakes import FakeRunner

from envboot.lib.brew import HomebrewAdapter
from envboot.models import Package, PackageKind

GIT = Package(identifier="git", kind=PackageKind.FORMULA)
CODE = Package(identifier="visual-studio-code", kind=PackageKind.CASK)


def no_which(name):
    return None


def make(respond, *, existing=("/opt/homebrew/bin/brew",), **kwargs):
    runner = FakeRunner(respond)
    adapter = HomebrewAdapter(runner=runner, which=no_which, exists=lambda p: p in existing, **kwargs)
    return adapter, runner


def test_finds_brew_on_path_first():
    adapter = HomebrewAdapter(which=lambda n: "/usr/local/bin/brew", exists=lambda p: False)
    assert adapter.find_brew() == "/usr/local/bin/brew"


def test_finds_brew_under_standard_prefix_when_not_on_path():
    adapter, _ = make(lambda argv: (0, "", ""))
    assert adapter.is_available()
    assert adapter.find_brew() == "/opt/homebrew/bin/brew"


def test_unavailable_when_not_found():
    adapter, _ = make(lambda argv: (0, "", ""), existing=())
    assert not adapter.is_available()
    assert not adapter.is_installed(GIT)
    r = adapter.install(GIT)
    assert not r.ok
    assert r.detail == "brew not found"


def test_prefix_override():
    adapter, _ = make(lambda argv: (0, "", ""), existing=("/custom/bin/brew",), prefix="/custom")
    assert adapter.find_brew() == "/custom/bin/brew"
    assert adapter.path_entries() == ("/custom/bin", "/custom/sbin")


def test_is_installed_uses_formula_or_cask_listing():
    adapter, runner = make(lambda argv: (0, "", ""))
    assert adapter.is_installed(GIT)
    assert adapter.is_installed(CODE)
    assert runner.calls[0] == ["/opt/homebrew/bin/brew", "list", "--formula", "git"]
    assert runner.calls[1] == ["/opt/homebrew/bin/brew", "list", "--cask", "visual-studio-code"]


def test_generic_kind_is_treated_as_formula():
    adapter, runner = make(lambda argv: (1, "", "Error: No such keg"))
    assert not adapter.is_installed(Package(identifier="jq"))
    assert runner.calls[0][2] == "--formula"


def test_install_cask_argv_and_path_entries():
    adapter, runner = make(lambda argv: (0, "", ""))
    pkg = Package(identifier="iterm2", kind=PackageKind.CASK, install_args=("--no-quarantine",))

    r = adapter.install(pkg)
    assert r.ok
    assert runner.calls[0] == ["/opt/homebrew/bin/brew", "install", "--cask", "--no-quarantine", "iterm2"]
    assert r.path_entries == ("/opt/homebrew/bin", "/opt/homebrew/sbin")


def test_install_failure_reports_no_path_entries():
    adapter, _ = make(lambda argv: (1, "", "Error: network error"))
    r = adapter.install(GIT)
    assert not r.ok
    assert r.detail == "Error: network error"
    assert r.path_entries == ()


def test_already_installed_warning_counts_as_success():
    adapter, _ = make(lambda argv: (0, "", "Warning: git 2.45.0 is already installed and up-to-date."))
    assert adapter.install(GIT).ok
