from pathlib import Path
from setuptools import setup

root_dir = Path(__file__).parent
with open(root_dir / "README.md") as f:
    readme = f.read()

extras_require = {
    "dev": ["pytest", "nox", "ruff", "mypy"],
}

setup(
    name="pdfbuilder",
    version="0.1.0",
    packages=["pdfbuilder"],
    package_data={"pdfbuilder": ["py.typed"]},
    install_requires=[
        "charset-normalizer >= 2.0.0",
    ],
    extras_require=extras_require,
    description="PDF content stream builder",
    long_description=readme,
    long_description_content_type="text/markdown",
    license="MIT",
    keywords=[
        "pdf",
        "pdf generation",
        "content stream",
        "vector graphics",
    ],
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: 3 :: Only",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Topic :: Multimedia :: Graphics",
    ],
)
