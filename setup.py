from setuptools import find_packages, setup


def get_version():
    with open("patchkit/__init__.py") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().replace('"', "").replace("'", "")
    raise RuntimeError("No version found!")


setup(
    name="patchkit",
    version=get_version(),
    description="patchkit: modular, all-or-nothing regex patching of packaged application bundles",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "loguru",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    package_data={
        "patchkit": [
            "configs/catalogs/*.yaml",
        ]
    },
    entry_points={
        "console_scripts": [
            "patchkit=patchkit.cli.main:main",
        ]
    },
    python_requires=">=3.8",
    include_package_data=True,
    zip_safe=False,
)
