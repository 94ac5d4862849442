"""Version information for hunt_summary."""

__version__ = "0.3.0"
__author__ = "Hunt Summary Extractor contributors"
__email__ = "maintainers@hunt-summary.invalid"
