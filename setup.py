import setuptools

version = {}
with open('midimux/version.py') as f:
    exec(f.read(), version)

with open('README.md', 'r') as f:
    long_description = f.read()

setuptools.setup(
    name="midimux",
    version=version['__version__'],
    description="Multiplex two MIDI files by turning the notes of one into the volume of the other",
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=setuptools.find_packages(),
    entry_points={
        'console_scripts': [
            'midimux = midimux.main:main'
        ]
    },
    python_requires='>=3.6',
    install_requires=[
        'coloredlogs',
        'mido',
        'numpy',
        'pyyaml',
    ],
    extras_require={
        'play': [
            'python-rtmidi',
        ],
        'test': [
            'pytest',
        ]
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Operating System :: OS Independent',
        'Topic :: Multimedia :: Sound/Audio :: MIDI',
        'Topic :: Utilities',
    ],
)
