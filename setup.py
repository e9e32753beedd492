from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    # Basic metadata
    name='market_db',
    version='0.1.0',

    # Description
    description='Data-access core for the equipment marketplace backend.',
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Package structure
    packages=find_packages(include=['market_db', 'market_db.*']),

    # Python requirements
    python_requires=">=3.8",

    # Dependencies
    install_requires=[
        'SQLAlchemy>=2.0.0',
        'psycopg2-binary>=2.9.0',
        'pydantic>=2.0.0',
        'python-dotenv>=1.0.0',  # .env support
    ],

    # Optional dependencies
    extras_require={
        'dev': [
            'pytest>=7.0.0',
        ]
    },

    include_package_data=True,

    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Database",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],

    keywords="postgresql, database, sqlalchemy, marketplace, repository",
)
