"""
Setup script for the InterestPointDetection package.
"""

from setuptools import setup, find_packages
import os


def read_readme():
    """Read README file for long description."""
    if os.path.exists('README.md'):
        with open('README.md', 'r', encoding='utf-8') as f:
            return f.read()
    return "Oriented interest point detection for image matching"


# Core requirements (always installed)
install_requires = [
    'opencv-python>=4.5.0',
    'numpy>=1.19.0',
    'matplotlib>=3.3.0',
    'pandas>=1.2.0',
    'psutil>=5.8.0'
]

# Optional dependencies for different use cases
extras_require = {
    'test': [
        'pytest>=6.0.0',
    ],
    'dev': [
        'pytest>=6.0.0',
        'pytest-cov>=2.12.0',
        'black>=21.0.0',
        'isort>=5.9.0',
        'flake8>=3.9.0'
    ]
}

setup(
    name="interest-point-detection",
    version="1.0.0",
    author="Feature Detection Team",
    author_email="support@example.com",
    description="Oriented interest point detection (Harris/Noble corners, LoG blobs, scale space)",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=['InterestPointDetection', 'InterestPointDetection.*']),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Image Processing",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    keywords=[
        "computer vision",
        "interest points",
        "feature detection",
        "Harris",
        "Laplacian of Gaussian",
        "scale space",
        "opencv"
    ],
)
