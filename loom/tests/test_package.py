"""Basic package tests for Loom."""

import logging


def test_package_imports():
    """Test that the package can be imported."""
    import loom
    assert loom.__version__ == "0.1.0"


def test_subpackage_imports():
    """Test that the subpackages can be imported."""
    import loom.core
    import loom.generation
    import loom.observe


def test_logging_setup(temp_data_dir):
    """Test that logging can be set up."""
    from loom.logging_config import setup_logging

    log_path = setup_logging(temp_data_dir / "logs")
    assert log_path.exists()
    assert log_path.name == "loom.log"

    # Re-initialising replaces handlers rather than stacking them
    setup_logging(temp_data_dir / "logs")
    assert len(logging.getLogger("loom").handlers) == 2
    _close_loom_handlers()


def test_debug_console_level(temp_data_dir):
    """--debug style setup lets DEBUG through to the console."""
    from loom.logging_config import setup_logging

    setup_logging(temp_data_dir, debug=True)
    handlers = logging.getLogger("loom").handlers
    assert [h.level for h in handlers] == [logging.DEBUG, logging.DEBUG]

    setup_logging(temp_data_dir)
    handlers = logging.getLogger("loom").handlers
    assert [h.level for h in handlers] == [logging.DEBUG, logging.WARNING]
    _close_loom_handlers()


def test_setup_is_logged(temp_data_dir):
    """Setting up writes a LOGGING record naming the file."""
    from loom.logging_config import setup_logging

    log_path = setup_logging(temp_data_dir)
    _close_loom_handlers()

    assert f"LOGGING | {log_path.absolute()}" in log_path.read_text(encoding="utf-8")


def test_collapse_is_logged(temp_data_dir, checker_sample):
    """A collapse run writes a COLLAPSE record to the log file."""
    from loom.generation import Grid
    from loom.logging_config import setup_logging

    log_path = setup_logging(temp_data_dir)
    grid = Grid(3, 3, checker_sample, seed=17)
    grid.collapse()
    _close_loom_handlers()

    contents = log_path.read_text(encoding="utf-8")
    assert "COLLAPSE | 3x3 | seed=17 | steps=9" in contents


def _close_loom_handlers():
    root_logger = logging.getLogger("loom")
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)
