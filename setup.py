from setuptools import setup, find_packages

setup(
    name="forma",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"forma": ["py.typed"]},
    python_requires=">=3.11",
    install_requires=[
        'requests>=2.31.0',
        'urllib3>=2.0.0',
        'PyYAML>=6.0',
        'typing_extensions>=4.5.0',
        'tabulate>=0.9.0',
        'icalendar>=5.0.0',
        'flask>=3.0.0',
        'flask-cors>=4.0.0',
        'stripe>=8.0.0'
    ],
    extras_require={
        'test': [
            'pytest>=7.4.0'
        ]
    },
    entry_points={
        'console_scripts': [
            'forma=forma.cli:main',
            'forma-server=forma.app:main'
        ]
    }
)
