from glob import glob
from setuptools import setup


setup(
    name='exprcalc',
    use_scm_version={
        'fallback_version': '0.1.0',
    },
    description='Infix calculator with float, bigint and bigdecimal modes',
    install_requires=[
        'regex',
        'prompt_toolkit',
        'mpmath',
    ],
    packages=['exprcalc'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.8',
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'flake8',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
