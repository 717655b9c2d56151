"""
jinjalens test suite
====================

Test Modules
------------
- test_context.py: cursor context resolution
- test_scanner.py: block parser state machine
- test_delimiters.py: mixed delimiter detection
- test_tags.py: tag balance and typo checks
- test_structure.py: quote and bracket balance
- test_variables.py: variable tree, undefined variables, property lookup
- test_linter.py: full lint pipeline and document-level properties
- test_completion.py: completion engine
- test_hover.py: hover documentation
- test_snippets.py: snippet builder
- test_config.py: settings model and loading
- test_tables.py: static language tables
- test_models.py: value objects and diagnostic builder
- test_cli.py: command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_linter.py

    # Run specific test class
    pytest tests/test_tags.py::TestTagBalance
"""
