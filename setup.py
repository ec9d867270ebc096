from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="lmsync",
    version="1.0.0",
    description="Local settings and file storage for a learning-management-system sync client",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['lmsync', 'lmsync.*']),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "lmsync-cli=lmsync.main:main",
        ],
    },
)
