from setuptools import setup, find_packages

setup(
    name='opsctl',
    version='0.1.0',
    packages=find_packages(),
    include_package_data=True,
    package_data={
        'opsctl': ['templates/*.j2'],
    },
    install_requires=[
        'typer',
        'kubernetes',
        'urllib3',
        'pydantic>=2',
        'jsonschema',
        'jinja2',
        'PyYAML',
        'python-dotenv',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'opsctl=opsctl.cli:app'
        ]
    },
    description='Validate and submit maintenance operation requests to database clusters',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
