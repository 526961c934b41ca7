from setuptools import setup, find_packages

setup(
    name="mhtml-post-site",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "beautifulsoup4>=4.12.0",
        "lxml>=4.9.0",
        "orjson>=3.9.0",
        "Pillow>=9.1.0",
        "regex>=2023.0.0",
        "tqdm>=4.66.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mhtml-site=mhtml_site.cli:main",
        ],
    },
    python_requires=">=3.9",
)
