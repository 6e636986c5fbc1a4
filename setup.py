"""Setup script for the citation manager package."""
from setuptools import setup, find_packages

setup(
    name="citation_manager",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-docx>=0.8.11",
        "flask>=2.2.0",
        "flask-limiter>=3.0.0",
        "flask-wtf>=1.1.0",
        "wtforms>=3.0.0",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
    description="Citation formatting and bibliography export for academic references",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    keywords="reference citation academic bibliography bibtex ris",
    include_package_data=True,
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Topic :: Text Processing :: Markup",
    ],
)
