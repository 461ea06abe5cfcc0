import glob

import setuptools

with open("README.md", "r") as fh:
	long_description = fh.read()

with open('VERSION', 'r') as fh:
	VERSION = fh.read().strip()

setuptools.setup(
	name="tuxmate",
	version=VERSION,
	author="abusoww",
	description="Arch Linux app installer - curated desktop applications in one go",
	long_description=long_description,
	long_description_content_type="text/markdown",
	url="https://github.com/abusoww/tuxmate",
	packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
	classifiers=[
		"Programming Language :: Python :: 3.12",
		"License :: OSI Approved :: MIT License",
		"Operating System :: POSIX :: Linux",
	],
	python_requires='>=3.12',
	install_requires=[
		'pydantic>=2.0',
	],
	extras_require={
		'test': ['pytest'],
	},
	package_data={'tuxmate': glob.glob('catalogs/*.json', root_dir='tuxmate')},
	entry_points={
		'console_scripts': ['tuxmate=tuxmate.main:main'],
	},
)
