#!/usr/bin/python
# -*- encoding: utf-8 -*-
# Copyright (c) 2010 OpenStack, LLC.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or
# implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
import setuptools

name = 'python-stackclient'

requires = [
    'requests>=2.4.0',
    'urllib3>=1.21',
    'keystoneauth1>=3.4.0',
    'os-service-types>=1.2.0',
]

test_requires = [
    'pytest',
    'stestr>=2.0.0',
]


def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()


setuptools.setup(
    name=name,
    version='1.0.0',
    description='Client Library for OpenStack identity and networking APIs',
    long_description=read('README.rst'),
    url='https://opendev.org/openstack/python-stackclient',
    license='Apache License (2.0)',
    author='OpenStack, LLC.',
    author_email='openstack-discuss@lists.openstack.org',
    packages=setuptools.find_packages(exclude=['test', 'test.*']),
    install_requires=requires,
    extras_require={'test': test_requires},
    python_requires='>=3.7',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
    ],
    entry_points={
        'console_scripts': [
            'stack = stackclient.shell:main',
        ],
    },
)
