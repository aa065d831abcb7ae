"""Terminal browser state, colour palette and styled-line building."""