from setuptools import setup, find_packages

setup(
    name="neuralscalar",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "torch",
        "numpy",
        "click",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "neuralscalar=neuralscalar.main:run",
        ],
    },
    zip_safe=False,
    include_package_data=True,
)
