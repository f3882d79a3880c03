name = "cfneval"
