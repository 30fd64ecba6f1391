def test_import_storyloom_package() -> None:
    import importlib

    module = importlib.import_module("storyloom")
    assert module.__version__


def test_services_exports_resolve() -> None:
    from storyloom.services import NarrativeStepEngine, StorySession, StorySimulator

    assert NarrativeStepEngine and StorySession and StorySimulator
