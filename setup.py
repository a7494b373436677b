from setuptools import setup


setup(
    name="wordsheet",
    version="0.1.0",
    description="Import vocabulary lists from messy Excel, CSV and Google Sheets exports",
    packages=["wordsheet"],
    python_requires=">=3.9",
    install_requires=[
        "pandas",
        "chardet",
        "openpyxl",
    ],
    extras_require={
        "excel-legacy": ["xlrd"],
        "ods": ["odfpy"],
        "all": ["xlrd", "odfpy"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "wordsheet=wordsheet.cli:main",
        ]
    },
)
