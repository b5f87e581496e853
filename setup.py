from setuptools import setup, find_packages

setup(
    name="cognitive-memory-engine",
    version="0.1.0",
    description="Multi-layer memory relevance scoring and SM-2 retention engine",
    author="Cognitive Memory Developer",
    python_requires=">=3.11",
    packages=find_packages(include=["cognitive_memory", "cognitive_memory.*"]),
    install_requires=[
        "pydantic>=2.5.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
        ]
    },
)
