# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="docmirror",
    version="0.1.0",
    description="Render a tree of markup documents into a mirrored static HTML site",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["docmirror", "docmirror.*"]),
    package_data={
        "docmirror.resources.templates": ["*.html"],
    },
    include_package_data=True,
    install_requires=[
        "Markdown>=3.4",
        "Jinja2>=3.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        'console_scripts': [
            'docmirror=docmirror.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
