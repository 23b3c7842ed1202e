"""PPZ-Logalyzer upload core: pairing and upload orchestration for UAV flight logs."""

__version__ = "0.1.0"
