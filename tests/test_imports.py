"""
Smoke tests to verify all modules can be imported.
"""

def test_import_ministore():
    import ministore
    assert hasattr(ministore, '__version__')


def test_import_cli():
    from ministore import cli
    assert hasattr(cli, 'app')
