from setuptools import setup, find_packages

setup(
    name='eks-node-bootstrap',
    version='0.1.0',
    packages=find_packages(),
    include_package_data=True,
    package_data={
        'eksbootstrap.modules.bootstrap': ['templates/*.j2'],
    },
    install_requires=[
        'typer',
        'requests',
        'boto3',
        'botocore',
        'jinja2',
        'pyyaml',
        'python-dotenv',
    ],
    extras_require={
        'test': [
            'pytest',
            'click>=8.2',
        ],
    },
    entry_points={
        'console_scripts': [
            'eks-bootstrap=eksbootstrap.cli:app'
        ]
    },
    description='Bootstraps an EC2 instance into an existing EKS cluster',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX :: Linux',
    ],
    python_requires='>=3.8',
)
