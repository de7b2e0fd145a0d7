# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="etcdextract",
    version="1.0.0",
    description="Periodically extract etcd subtrees as a single timestamped JSON document",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["etcdextract*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",
        "urllib3>=2.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'etcdextract=etcdextract.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
