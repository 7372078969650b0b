"""
Version information for gridsynth - grid pattern to program synthesis
"""

__version__ = "0.1.0"
__version_info__ = (0, 1, 0)

# Release information
__title__ = "gridsynth"
__description__ = "Discover algebraic rules in character grids and compile them to minimal programs"
__author__ = "gridsynth contributors"
__author_email__ = "gridsynth@users.noreply.github.com"
__license__ = "AGPLv3"
__url__ = "https://github.com/gridsynth/gridsynth"

# Build information
__build__ = "pre-release"
__status__ = "Development"

def get_full_version():
    """Get full version information."""
    return {
        "version": __version__,
        "title": __title__,
        "description": __description__,
        "author": __author__,
        "license": __license__,
        "build": __build__,
        "status": __status__
    }
