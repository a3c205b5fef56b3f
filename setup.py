from setuptools import setup, find_packages

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name='backdrop',
    version='0.1.0',
    author='Tahn Jandai',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    package_data={
        'backdrop.config_files': ['*.yaml'],
    },
    include_package_data=True,
    python_requires='>=3.9',
    install_requires=[
        'numpy',
        'scipy',
        'dask[array]',
        'tqdm',
        'pyyaml',
        'pillow',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'backdrop=backdrop.__main__:main',
        ],
    },
)
