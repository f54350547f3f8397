"""
Baakh poetry platform API package.
This package contains the Flask application, the Sindhi text tools
(hesudhar correction, romanization) and the couplet authoring workflow client.
"""

__version__ = '1.0.0'
