"""arangoctl - command line client built on arangodriver."""
