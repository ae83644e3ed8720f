"""Smoke tests to verify basic package setup."""


def test_package_imports() -> None:
    """Verify that the main package can be imported."""
    import gen_ai_example

    assert gen_ai_example.__version__ == "0.1.0"


def test_submodules_import() -> None:
    """Verify that all submodules can be imported."""
    from gen_ai_example import chat, cli, core, observability, orchestrator, tools

    for module in (chat, cli, core, observability, orchestrator, tools):
        assert module is not None


def test_cli_main_exists() -> None:
    """Verify that the CLI entry point exists."""
    from gen_ai_example.cli import main

    assert callable(main)
