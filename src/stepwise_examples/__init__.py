# Sample scenario classes; the CLI's default base package and a fixture for engine tests.
