from setuptools import setup, find_packages
import os

install_requires = ["lark", "pydantic>=2"]

# Define optional dependencies for development and specific features
extras_require = {"dev": ["pytest", "pygls>=1.1,<2", "lsprotocol"], "lsp": ["pygls>=1.1,<2", "lsprotocol"]}  # Language Server Protocol support

setup(
    name="sandbox-completion",
    version="1.0.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "sandbox-describe = sandbox_completion.cli:main",
        ],
    },
    include_package_data=True,
    package_data={"sandbox_completion": ["type_signature.lark", "definitions/*.json"]},
    description="Type descriptions and return-value materialization for the built-in objects of a live Python environment.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
