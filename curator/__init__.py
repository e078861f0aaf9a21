"""Curator - metadata curation toolkit for research data resources."""

__version__ = "0.1.0"
__author__ = "GFZ Data Services"
__license__ = "GNU General Public License v3.0"
__description__ = "Normalizes, edits and saves author and contributor metadata of research data resources"
