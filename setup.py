from setuptools import setup, find_packages

setup(
    name="lyricbar",
    version="0.1.0",
    description="Lyrics for the playing track from embedded tags, a local cache, or your own lookup command",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"lyricbar": ["py.typed"], "lyricbar.i18n": ["*.json"]},
    install_requires=[
        "colorama>=0.4.6",
        "regex",
        "dbus-python",
        "mutagen",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "lyricbar=lyricbar.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Utilities",
    ],
    keywords="lyrics cache mpris deadbeef music",
)
