"""Scoped contexts, tag and fixture helpers, and console/JUnit reporting for Gherkin test runners."""

__version__ = "1.1.0"
__all__ = ["context", "support", "report", "junit_report", "stdout_report"]