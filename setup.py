

from setuptools import setup, find_packages

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('HISTORY.rst') as history_file:
    history = history_file.read()

with open('requirements.txt',encoding='utf-8') as requirements_file:
    all_pkgs = requirements_file.readlines()

requirements = [pkg.strip() for pkg in all_pkgs if pkg.strip() and "#" not in pkg]
test_requirements = ['pytest>=7']

setup(
    name='paperless-chain',
    author='Cheng Chen',
    author_email='chenzi00103@gmail.com',
    description='Document ingestion helpers built around a sandboxed command chain that runs image normalization, OCR and thumbnailing tools',
    python_requires='>=3.10',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'Programming Language :: Python :: 3.10',
    ],
    install_requires=requirements,
    extras_require={'test': test_requirements},
    long_description=readme + '\n\n' + history,
    include_package_data=True,
    package_data={'paperless': ['conf/*.yaml']},
    keywords='paperless',
    packages=find_packages(include=['paperless', 'paperless.*']),
    version='0.0.1',
    zip_safe=False,
)
