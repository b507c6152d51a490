# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="shadersync",
    version="0.1.0",
    description="Recompila recursivamente shaders a SPIR-V eliminando artefactos obsoletos",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["shadersync", "shadersync.*"]),
    python_requires=">=3.8",
    install_requires=[
        "colorama>=0.4.6",  # Resaltado de diagnósticos del compilador en consola
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'shadersync=shadersync.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
