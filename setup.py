# SPDX-License-Identifier: LGPL-3.0-or-later
from setuptools import setup, find_packages

setup(
    name="kvm-persistent-net",
    version="0.1.0",
    description="Persistent network interface names for shut-off KVM/libvirt guests via udev rules",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[l.strip() for l in open("requirements.txt", encoding="utf-8") if l.strip() and not l.startswith("#")],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["kvm-vm-persistent-net=kvm_persistent_net.__main__:main"]},
)
