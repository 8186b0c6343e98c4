#!/usr/bin/env python3

from setuptools import setup

version = '1.0.0'
author = 'Azaria Zornberg'
email = 'a.zornberg96@gmail.com'
license_str = 'MIT License'
url = 'https://github.com/zorn96/ms_winstructs/'
description = 'Python library for decoding and encoding Windows security identifiers and security descriptors'
package_name = 'ms_winstructs'
package_folder = '.'

long_description = open('README.md', encoding='utf-8').read()
packages = ['ms_winstructs',
            'ms_winstructs.core',
            'ms_winstructs.security',
            ]


setup_kwargs = {
    'packages': packages,
    'package_dir': {'': package_folder},
}

requirements = ['ldap3>=2.8.0',
                ]

test_requirements = ['pytest>=6.0',
                     ]

setup(name=package_name,
      version=version,
      install_requires=requirements,
      extras_require={'test': test_requirements},
      license=license_str,
      author=author,
      author_email=email,
      description=description,
      long_description=long_description,
      long_description_content_type='text/markdown',
      keywords='python3 windows security-descriptor sid acl ace forensics ntfs registry',
      python_requires=">=3.6",
      url=url,
      classifiers=['Development Status :: 5 - Production/Stable',
                   'Intended Audience :: Developers',
                   'Intended Audience :: Information Technology',
                   'License :: OSI Approved :: MIT License',
                   'Operating System :: OS Independent',
                   'Programming Language :: Python',
                   'Programming Language :: Python :: 3',
                   'Topic :: Security',
                   'Topic :: Software Development :: Libraries :: Python Modules',
                   'Topic :: System :: Filesystems'],
      **setup_kwargs
      )
