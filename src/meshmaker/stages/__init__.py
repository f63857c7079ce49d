"""Pipeline stages. Each module ``meshmaker.stages.<stage name>`` defines one ``*Stage`` class."""
