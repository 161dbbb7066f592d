import os.path

pytoml = os.path.join(os.path.dirname(__file__), "..", "pyproject.toml")
if os.path.isfile(pytoml):
    import toml

    __version__ = toml.load(open(pytoml))["project"]["version"]
else:
    from importlib.metadata import version

    __version__ = version("markuplinks")
