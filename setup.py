import setuptools

setuptools.setup(
    name="dndbot",
    version="0.0.0",
    classifiers=["Programming Language :: Python :: 3"],
    python_requires=">=3.9",
    packages=["dndbot"],
    package_data={"dndbot": ["settings.default.yaml"]},
    entry_points={"console_scripts": ["dndbot=dndbot.__main__:main"]},
    install_requires=["discord.py", "pyyaml", "plotly", "kaleido", "pandas"],
    extras_require={"test": ["pytest"]},
)
