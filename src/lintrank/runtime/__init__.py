"""Runtime services shared by the command line and report renderer."""
