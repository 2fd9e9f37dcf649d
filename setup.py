from glob import glob
from setuptools import setup


setup(
    name='mathexpr',
    version='0.1.0',
    description='Infix math expression parser and RPN evaluator',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['mathexpr'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.6',
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
