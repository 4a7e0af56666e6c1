pytest_plugins = ["repoguard.testing.conftest"]
