# setup.py
from setuptools import setup, find_packages

setup(
    name="market_chart",
    version="0.1.0",
    packages=find_packages(include=["market_chart", "market_chart.*"]),
    py_modules=["run_chart_panel"],
    install_requires=[
        "pandas",
        "numpy",
        "pyqtgraph",
        "PyQt6",
        "python-dotenv",
        "requests",
        "pytz",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
