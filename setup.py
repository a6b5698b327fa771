"""Setup configuration for prbridge"""

from setuptools import setup, find_packages

setup(
    name="github-pr-bridge",
    version="0.1.0",
    description=(
        "Line-delimited JSON-RPC bridge exposing GitHub pull requests, "
        "comments and CI checks as read-only tools."
    ),
    author="GitHub PR Bridge Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "python-dotenv>=1.0.0",
        "mcp>=1.12,<2",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "github-pr-bridge=prbridge.main:main",
        ],
    },
)
