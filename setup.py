from setuptools import setup, find_namespace_packages

setup(
    name="book_assembly",
    version="0.1.0",
    packages=find_namespace_packages(include=['api*', 'cli*', 'core*']),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "fastapi",
        "pydantic[email]>=2",
        "uvicorn",
        "requests",
        "Pillow",
        "PyJWT",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "book-assembly=cli.main:main",
        ],
    },
)
