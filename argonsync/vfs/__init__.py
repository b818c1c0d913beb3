"""Virtual file systems for the real disk and for memory, with debounced change events."""