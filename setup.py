from setuptools import setup, find_packages

setup(
    name="pitchmarker",
    version="1.0.0",
    description="GPS-guided sports pitch positioning and line marking",
    author="NovaVista",
    packages=find_packages(include=["pitchmarker", "pitchmarker.*"]),
    install_requires=[
        "opencv-python>=4.8.0",
        "numpy>=1.24.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
)
