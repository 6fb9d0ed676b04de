"""
skillfetch - Installs Agent Skills from the webdev-agent-skills archive.
"""

__version__ = "1.0.0"
