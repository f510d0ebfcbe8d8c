"""
Loading of the authored repository configuration.

This package is responsible for:
* Reading the configuration file (JSON or YAML) from disk.
* Validating it into an immutable `RepositoryConfig`.
* Turning every failure into a `ConfigurationError` so startup can abort.
"""
