"""Install the authengine account and session package."""

from setuptools import setup, find_packages

setup(
    name='authengine',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    install_requires=[
        "sqlalchemy>=1.4",
        "bcrypt",
        "pytz",
        "click",
        "python-json-logger",
    ],
    extras_require={
        'mysql': ["mysqlclient"],
        'test': ["pytest", "hypothesis", "mimesis"],
    },
    entry_points={
        'console_scripts': ['authengine=authengine.manage:cli'],
    },
    python_requires=">=3.8",
    zip_safe=False
)
