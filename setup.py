from setuptools import setup, find_packages

setup(
    name="voltedge_shipping",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*", "migrations", "migrations.*", "scripts"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        'flask',
        'flask-sqlalchemy',
        'flask-migrate',
        'flask-wtf',
        'python-dotenv',
        'sqlalchemy',
        'click',
    ],
    extras_require={
        'tests': [
            'pytest',
        ],
    },
)
