from setuptools import setup, find_packages

setup(
    name="bond_calculator",
    version="0.1.0",
    description="Fixed-coupon bond analytics: yields, YTM solvers and cash-flow schedules",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
            "scipy",
        ],
    },
    python_requires=">=3.8",
)
