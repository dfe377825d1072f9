from setuptools import setup, find_packages

setup(
    name='rollup-devtool',
    version='0.1.0',
    py_modules=['devtool'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'bundling.engines': ['*.mjs'],
    },
    python_requires='>=3.9',
    install_requires=[
        'pydantic>=2.0',
        'python-dotenv',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'devtool = devtool:main',
        ],
    },
)
