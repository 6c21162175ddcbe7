import setuptools

with open('README.md', 'rt') as f:
    long_description = f.read()

setuptools.setup(
    name='ratmath',
    version='0.0.0',
    description='exact rational and interval arithmetic, with an expression evaluator',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    install_requires=['gmpy2>=2.1.2'],
    extras_require={
        'test': ['pytest'],
    },
    packages=['ratmath', 'ratmath/numeric', 'ratmath/arithmetic', 'ratmath/parsing'],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Operating System :: POSIX :: Linux',
        'License :: OSI Approved :: MIT License',
    ],
)
