"""Worked solutions to some course exercises: basics, errors, sequences and objects."""