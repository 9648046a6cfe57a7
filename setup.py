"""
setup.py for the fluid_surface package.

viewer.py requires pygame, which is only needed for local interactive
use, so it is left out of built wheels (install the "viewer" extra and
run from a checkout to get the window).
"""

from setuptools import setup
from setuptools.command.build_py import build_py as _build_py


# Files that require pygame and should not be packaged in the wheel.
_EXCLUDE_MODULES = {"viewer"}


class BuildPy(_build_py):
    """Custom build_py that excludes pygame-dependent modules."""

    def find_package_modules(self, package, package_dir):
        modules = super().find_package_modules(package, package_dir)
        return [
            (pkg, mod, path)
            for (pkg, mod, path) in modules
            if mod not in _EXCLUDE_MODULES
        ]


setup(
    name="fluid-surface",
    version="0.1.0",
    description="Frame-stepped fluid volume surface with mirrored all-pairs diffusion",
    package_dir={"": "plugins"},
    packages=["fluid_surface"],
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "scipy",
        "Pillow",
    ],
    extras_require={
        "viewer": ["pygame"],
        "test": ["pytest"],
    },
    cmdclass={"build_py": BuildPy},
)
