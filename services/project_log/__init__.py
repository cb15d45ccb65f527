"""
Project Log Service.

This service is responsible for:
- Detecting recent git commits across registered local projects
- Classifying commit activity into log categories
- Generating human-readable project-log entries
- Reporting per-project change status
"""

__version__ = "1.0.0"
__description__ = "Git change detection and project-log generation service"
