from setuptools import find_packages, setup

setup(
    name="xtalcontacts",
    version="0.1.0",
    description="Enumeration of the unique interfaces of an asymmetric unit in its crystal lattice",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "xtalcontacts.crystal": ["sgdata.json"],
        "xtalcontacts.tests": ["test_files/*"],
    },
    install_requires=["numpy", "scipy", "tqdm"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "xtalcontacts-interfaces=xtalcontacts.cmd.find_interfaces:main",
        ]
    },
)
